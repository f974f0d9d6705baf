"""Global constants for the forkful application."""

# Collection names
USERS_COLLECTION = "users"
GROUPS_COLLECTION = "groups"
POSTS_COLLECTION = "posts"
REACTIONS_COLLECTION = "reactions"
COMMENTS_COLLECTION = "comments"
SAVED_POSTS_COLLECTION = "saved_posts"

# Reactions
REACTION_TYPES = ("like", "love", "haha", "sad")

# Posts
POST_VISIBILITIES = ("public", "private", "group")
DEFAULT_FEED_LIMIT = 20

# Writes per batch when deleting a post with its reactions and comments
FIRESTORE_BATCH_LIMIT = 400
MAX_POST_LENGTH = 500
RATING_CATEGORIES = ("food", "ambiance", "overall")
MAX_RATING = 5
