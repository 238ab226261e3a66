# Services package.
#
# Each module exposes async functions holding the business rules and
# database access for one aggregate:
#
#   post_service     - post CRUD, post likes, post-with-comments reads
#   comment_service  - comment CRUD and comment likes, scoped to a post
#   user_service     - signup, login, user reads
#
# All service functions accept an AsyncSession as their first argument
# and report rejected operations by raising ``app.exceptions.BlogError``
# subclasses; the ``get_db`` dependency owns commit/rollback.
