"""Routes for the post blueprint."""

from firebase_admin import firestore
from flask import current_app, g, jsonify, request

from forkful.auth.decorators import login_required
from forkful.errors import NotFoundError, PermissionDenied
from forkful.group.services import GroupService
from forkful.utils import serialize_doc, validate_form

from . import bp
from .forms import CommentForm, PostForm, ReactionForm, ReplyForm
from .services import (
    CommentService,
    PostService,
    ReactionService,
    SavedPostService,
    total_reactions,
)


def _check_can_view(db, post, viewer_id):
    """Raise PermissionDenied if the viewer may not see the post."""
    if post.get("authorId") == viewer_id:
        return
    visibility = post.get("visibility", "public")
    if visibility == "private":
        raise PermissionDenied("view", message="This post is private.")
    if visibility == "group":
        group = GroupService.get_group(db, post.get("groupId", ""))
        if group is None or (
            group.get("isPrivate") and viewer_id not in group.get("members", [])
        ):
            raise PermissionDenied(
                "view", message="Only group members can view this post."
            )


def _load_visible_post(db, post_id):
    post = PostService.get_post(db, post_id)
    if post is None:
        raise NotFoundError("Post not found.")
    _check_can_view(db, post, g.user["uid"])
    return post


@bp.route("/", methods=["POST"])
@login_required
def create_post():
    """Publish a review post."""
    form = validate_form(PostForm())
    payload = request.get_json(silent=True) or {}
    db = firestore.client()
    post_id = PostService.create_post(
        db,
        g.user["uid"],
        form.content.data,
        images=payload.get("images"),
        ratings=payload.get("ratings"),
        visibility=form.visibility.data,
        group_id=form.group_id.data or None,
    )
    return jsonify({"id": post_id}), 201


@bp.route("/feed", methods=["GET"])
@login_required
def feed():
    """Return the newest posts, either public ones or a single group's."""
    db = firestore.client()
    group_id = request.args.get("group")
    if group_id:
        posts = PostService.get_group_posts(db, group_id, g.user["uid"])
    else:
        page_size = current_app.config["FEED_PAGE_SIZE"]
        limit = request.args.get("limit", page_size, type=int)
        posts = PostService.get_public_feed(db, limit=max(1, min(limit, page_size)))
    return jsonify({"posts": [serialize_doc(post) for post in posts]})


@bp.route("/saved", methods=["GET"])
@login_required
def saved_posts():
    """List the IDs of the posts the current user bookmarked."""
    db = firestore.client()
    return jsonify({"posts": SavedPostService.get_saved_posts(db, g.user["uid"])})


@bp.route("/<string:post_id>", methods=["GET"])
@login_required
def view_post(post_id):
    """Show a post with its reaction total and whether it is bookmarked."""
    db = firestore.client()
    post = _load_visible_post(db, post_id)
    data = serialize_doc(post)
    data["totalReactions"] = total_reactions(post.get("reactionCount"))
    data["saved"] = SavedPostService.is_post_saved(db, g.user["uid"], post_id)
    return jsonify(data)


@bp.route("/<string:post_id>", methods=["DELETE"])
@login_required
def delete_post(post_id):
    """Delete a post. Author only."""
    db = firestore.client()
    PostService.delete_post(db, post_id, g.user["uid"])
    return "", 204


@bp.route("/<string:post_id>/reactions", methods=["POST"])
@login_required
def toggle_reaction(post_id):
    """Add, switch or remove the current user's reaction."""
    form = validate_form(ReactionForm())
    db = firestore.client()
    _load_visible_post(db, post_id)
    result = ReactionService.toggle(db, post_id, g.user["uid"], form.type.data)
    return jsonify(result.to_dict())


@bp.route("/<string:post_id>/reactions", methods=["GET"])
@login_required
def reactions(post_id):
    """Return per-type counts and the current user's reaction."""
    db = firestore.client()
    _load_visible_post(db, post_id)
    counts = ReactionService.get_counts(db, post_id)
    mine = ReactionService.get_user_reaction(db, post_id, g.user["uid"])
    return jsonify(
        {
            "counts": counts,
            "total": total_reactions(counts),
            "userReaction": mine["type"] if mine else None,
        }
    )


@bp.route("/<string:post_id>/comments", methods=["GET"])
@login_required
def list_comments(post_id):
    """List a post's comments, oldest first."""
    db = firestore.client()
    _load_visible_post(db, post_id)
    comments = CommentService.list_comments(db, post_id)
    return jsonify({"comments": [serialize_doc(c) for c in comments]})


@bp.route("/<string:post_id>/comments", methods=["POST"])
@login_required
def create_comment(post_id):
    """Comment on a post as the current user."""
    form = validate_form(CommentForm())
    db = firestore.client()
    _load_visible_post(db, post_id)
    comment_id = CommentService.create_comment(
        db,
        post_id,
        g.user["uid"],
        g.user.get("name") or "Anonymous",
        g.user.get("photoUrl"),
        form.content.data,
    )
    return jsonify({"id": comment_id}), 201


@bp.route("/comments/<string:comment_id>", methods=["DELETE"])
@login_required
def delete_comment(comment_id):
    """Delete a comment. Its author or the post's author only."""
    db = firestore.client()
    CommentService.delete_comment(db, comment_id, actor_id=g.user["uid"])
    return "", 204


@bp.route("/comments/<string:comment_id>/replies", methods=["POST"])
@login_required
def add_reply(comment_id):
    """Reply to a comment."""
    form = validate_form(ReplyForm())
    db = firestore.client()
    comment = CommentService.get_comment(db, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found.")
    _load_visible_post(db, comment["postId"])
    reply_id = CommentService.add_reply(db, comment_id, g.user["uid"], form.text.data)
    return jsonify({"id": reply_id}), 201


@bp.route("/comments/<string:comment_id>/replies/<string:reply_id>", methods=["DELETE"])
@login_required
def delete_reply(comment_id, reply_id):
    """Delete a reply. Its author or the comment's author only."""
    db = firestore.client()
    CommentService.delete_reply(db, comment_id, reply_id, actor_id=g.user["uid"])
    return "", 204


@bp.route("/<string:post_id>/save", methods=["PUT"])
@login_required
def save_post(post_id):
    """Bookmark a post."""
    db = firestore.client()
    _load_visible_post(db, post_id)
    SavedPostService.save_post(db, g.user["uid"], post_id)
    return jsonify({"saved": True})


@bp.route("/<string:post_id>/save", methods=["DELETE"])
@login_required
def unsave_post(post_id):
    """Remove a bookmark."""
    db = firestore.client()
    SavedPostService.unsave_post(db, g.user["uid"], post_id)
    return jsonify({"saved": False})
