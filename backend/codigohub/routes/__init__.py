# Routes package init
"""
CodigoHub Backend — API Routes Package
=======================================

What:  HTTP route handlers that accept requests and return envelopes.

Route Inventory:
    - codigos.py:            /api/codigos            (snippets, tags, collection membership)
    - collections.py:        /api/collections        (collections and their snippets)
    - codigo_categorias.py:  /api/codigo-categorias  (code ↔ category links)
    - categories.py:         /api/categories         (category CRUD)
    - subscriptions.py:      /api/subscriptions      (subscriptions and the feed)
    - users.py:              /api/users              (register, login, profiles)
    - health.py:             /health                 (service health check)

Routes are thin: pull the body/path values, resolve the Actor through
get_current_actor, call one service method, wrap the result in a
`{success: true, message, ...}` envelope. Errors are raised by services
and rendered by the handlers in main.py.
"""
