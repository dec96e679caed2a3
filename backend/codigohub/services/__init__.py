# Services package init
"""
CodigoHub Backend — Services Layer
===================================

What:  Business rules between routes (HTTP) and the database (persistence).
How:   Each service is a stateless object with one module-level instance.
       Methods receive the request's AsyncSession and, where identity
       matters, the authenticated Actor.

Service Inventory:
    - authorization:             ALLOW/DENY rules and the found/access guards
    - CodigoService:             snippets, tag lookup, collection membership
    - CollectionService:         collections and their snippets
    - CodigoCategoriaService:    code ↔ category links
    - CategoryService:           categories with an activo/inactivo state
    - SubscriptionService:       user ↔ category subscriptions and the feed
    - UserService:               accounts, login, profiles
"""
