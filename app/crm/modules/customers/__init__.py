"""
Customers module.

Scope:
- GET /customers?prefix=a,b     -> customers whose first_name starts with any prefix
- DELETE /customers?prefix=a,b  -> transactional delete, reports {count, ids}
- No create/update endpoints: rows come from the initial migration
"""
