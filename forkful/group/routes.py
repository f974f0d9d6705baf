"""Routes for the group blueprint."""

from firebase_admin import firestore
from flask import g, jsonify

from forkful.auth.decorators import login_required
from forkful.errors import NotFoundError, PermissionDenied
from forkful.utils import serialize_doc, validate_form

from . import bp
from .forms import GroupForm, MemberForm
from .services import GroupService


def _member_to_json(entry):
    """Flatten a member entry into its JSON form."""
    return {"user": serialize_doc(entry["user"]), "role": entry["role"].value}


def _load_visible_group(db, group_id):
    """Fetch a group, raising unless the current user may see it."""
    group = GroupService.get_group(db, group_id)
    if group is None:
        raise NotFoundError("Group not found.")
    if group.get("isPrivate") and g.user["uid"] not in group.get("members", []):
        raise PermissionDenied("view the group")
    return group


@bp.route("/", methods=["POST"])
@login_required
def create_group():
    """Create a group owned by the current user."""
    form = validate_form(GroupForm())
    db = firestore.client()
    group_id = GroupService.create_group(
        db,
        form.name.data,
        g.user["uid"],
        is_private=form.is_private.data,
        image_url=form.image_url.data or None,
    )
    return jsonify({"id": group_id}), 201


@bp.route("/mine", methods=["GET"])
@login_required
def my_groups():
    """List the groups the current user belongs to."""
    db = firestore.client()
    groups = GroupService.get_user_groups(db, g.user["uid"])
    return jsonify({"groups": [serialize_doc(group) for group in groups]})


@bp.route("/<string:group_id>", methods=["GET"])
@login_required
def view_group(group_id):
    """Show a group. Private groups are only visible to their members."""
    db = firestore.client()
    group = _load_visible_group(db, group_id)
    return jsonify(serialize_doc(group))


@bp.route("/<string:group_id>", methods=["DELETE"])
@login_required
def delete_group(group_id):
    """Delete a group. Owner only."""
    db = firestore.client()
    GroupService.delete_group(db, group_id, g.user["uid"])
    return "", 204


@bp.route("/<string:group_id>/join", methods=["POST"])
@login_required
def join_group(group_id):
    """Join a group as a regular member."""
    db = firestore.client()
    role = GroupService.join(db, group_id, g.user["uid"])
    return jsonify({"role": role.value})


@bp.route("/<string:group_id>/leave", methods=["POST"])
@login_required
def leave_group(group_id):
    """Leave a group."""
    db = firestore.client()
    GroupService.leave(db, group_id, g.user["uid"])
    return "", 204


@bp.route("/<string:group_id>/members", methods=["GET"])
@login_required
def list_members(group_id):
    """List a group's members with their roles, most privileged first."""
    db = firestore.client()
    _load_visible_group(db, group_id)
    members = GroupService.list_members(db, group_id)
    return jsonify({"members": [_member_to_json(entry) for entry in members]})


@bp.route("/<string:group_id>/members", methods=["POST"])
@login_required
def add_member(group_id):
    """Add a user to the group. Owners and admins only."""
    form = validate_form(MemberForm())
    db = firestore.client()
    role = GroupService.add_member(db, group_id, g.user["uid"], form.user_id.data)
    return jsonify({"userId": form.user_id.data, "role": role.value}), 201


@bp.route("/<string:group_id>/members/<string:user_id>", methods=["DELETE"])
@login_required
def remove_member(group_id, user_id):
    """Remove a member from the group."""
    db = firestore.client()
    GroupService.remove_member(db, group_id, g.user["uid"], user_id)
    return "", 204


@bp.route("/<string:group_id>/members/<string:user_id>/admin", methods=["POST"])
@login_required
def promote_member(group_id, user_id):
    """Promote a member to admin. Owner only."""
    db = firestore.client()
    GroupService.promote(db, group_id, g.user["uid"], user_id)
    return jsonify({"userId": user_id, "role": "admin"})
