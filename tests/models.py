from jsonapi_update import DB, JsonApiUpdateMixin, NestedAttributesConfig, ValidationError


class Article(JsonApiUpdateMixin, DB.Model):
    """
    description: article with tags (destroyable), comments (not destroyable) and an author
    """

    __tablename__ = "articles"
    id = DB.Column(DB.Integer, primary_key=True)
    title = DB.Column(DB.String, default="")
    tags = DB.relationship("Tag", back_populates="article", cascade="all, delete-orphan", order_by="Tag.id")
    comments = DB.relationship("Comment", back_populates="article", cascade="all, delete-orphan", order_by="Comment.id")
    author = DB.relationship("Author", back_populates="article", uselist=False, cascade="all, delete-orphan")

    nested_attributes = {
        "tags": NestedAttributesConfig(allow_destroy=True, reject_if="all_blank"),
        "comments": NestedAttributesConfig(limit=3),
        "author": NestedAttributesConfig(allow_destroy=True, update_only=True),
    }

    def _s_validate(self):
        if self.title == "invalid":
            raise ValidationError("invalid title")


class Tag(JsonApiUpdateMixin, DB.Model):
    __tablename__ = "tags"
    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String, default="")
    article_id = DB.Column(DB.Integer, DB.ForeignKey("articles.id"))
    article = DB.relationship("Article", back_populates="tags")


class Comment(JsonApiUpdateMixin, DB.Model):
    __tablename__ = "comments"
    id = DB.Column(DB.Integer, primary_key=True)
    body = DB.Column(DB.String, nullable=False)
    article_id = DB.Column(DB.Integer, DB.ForeignKey("articles.id"))
    article = DB.relationship("Article", back_populates="comments")


class Author(JsonApiUpdateMixin, DB.Model):
    __tablename__ = "authors"
    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String, default="")
    article_id = DB.Column(DB.Integer, DB.ForeignKey("articles.id"))
    article = DB.relationship("Article", back_populates="author")


class Person(JsonApiUpdateMixin, DB.Model):
    __tablename__ = "people"
    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String, default="")
    children = DB.relationship("Child", back_populates="parent", cascade="all, delete-orphan", order_by="Child.id")

    nested_attributes = {"children": NestedAttributesConfig(allow_destroy=True)}


class Child(JsonApiUpdateMixin, DB.Model):
    __tablename__ = "children"
    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String, default="")
    parent_id = DB.Column(DB.Integer, DB.ForeignKey("people.id"))
    parent = DB.relationship("Person", back_populates="children")
