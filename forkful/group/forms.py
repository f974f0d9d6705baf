"""Forms for the group blueprint."""

from flask_wtf import FlaskForm
from wtforms import BooleanField, StringField
from wtforms.validators import URL, DataRequired, Length, Optional


class GroupForm(FlaskForm):
    """Form for creating a new group."""

    name = StringField("Group Name", validators=[DataRequired(), Length(max=100)])
    is_private = BooleanField("Private Group")
    image_url = StringField("Image URL", validators=[Optional(), URL()])


class MemberForm(FlaskForm):
    """Form for adding a user to a group."""

    user_id = StringField("User", validators=[DataRequired()])
