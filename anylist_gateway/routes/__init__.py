# Routes package init
"""
AnyList Gateway - API Routes Package
====================================

Route Inventory:
    - lists.py:    GET  /lists, GET /items
                   POST /add, /remove, /update, /check
    - recipes.py:  GET/POST /recipes, GET/PUT/DELETE /recipes/{id}
                   GET  /recipe-collections, POST /meal-plan
    - health.py:   GET  /health

Routes stay thin: read parameters, validate, open a client session, call a
service, shape the response. Business rules live in services/.
"""
