"""Forms for the post blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from forkful.constants import MAX_POST_LENGTH, POST_VISIBILITIES, REACTION_TYPES


class PostForm(FlaskForm):
    """Form for writing a review post."""

    content = TextAreaField(
        "Review", validators=[DataRequired(), Length(max=MAX_POST_LENGTH)]
    )
    visibility = SelectField(
        "Visibility",
        choices=[(v, v.title()) for v in POST_VISIBILITIES],
        default="public",
    )
    group_id = StringField("Group", validators=[Optional()])


class ReactionForm(FlaskForm):
    """Form for reacting to a post."""

    type = SelectField(
        "Reaction",
        choices=[(t, t.title()) for t in REACTION_TYPES],
        validators=[DataRequired()],
    )


class CommentForm(FlaskForm):
    """Form for commenting on a post."""

    content = TextAreaField("Comment", validators=[DataRequired()])


class ReplyForm(FlaskForm):
    """Form for replying to a comment."""

    text = TextAreaField("Reply", validators=[DataRequired()])
