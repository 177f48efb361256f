"""
python -m build
twine upload dist/*
"""

from setuptools import setup, find_packages


def jsonapi_update_setup():
    with open("requirements.txt", "rt") as fp:
        install_requires = fp.read().strip().split("\n")

    version = "0.2.0"

    setup(
        name="sqla-jsonapi-update",
        packages=find_packages(exclude=["tests", "tests.*"]),
        version=version,
        license="MIT",
        description="jsonapi_update : JSON:API relationship replacement for SQLAlchemy nested attribute updates",
        long_description=open("README.rst").read(),
        keywords=["SqlAlchemy", "Flask", "JsonAPI", "nested attributes"],
        python_requires=">=3.8, <4",
        install_requires=install_requires,
        classifiers=[
            "Development Status :: 3 - Alpha",
            "License :: OSI Approved :: MIT License",
            "Intended Audience :: Developers",
            "Framework :: Flask",
            "Topic :: Software Development :: Libraries",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.8",
        ],
        extras_require={"test": ["pytest>=7.0"]},
    )


jsonapi_update_setup()  # pragma: no cover
