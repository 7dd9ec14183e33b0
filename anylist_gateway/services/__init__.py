# Services package init
"""
AnyList Gateway - Services Layer
================================

What:  Business logic between the routes (HTTP) and the external list client.
How:   Services receive the request's logged-in ListClient and return response
       models or status codes; they never touch Request/Response objects.

Service Inventory:
    - ListClient (abstract): Contract the external client adapter implements
    - ListService:   Shopping lists and their items
    - RecipeService: Recipes, recipe collections and meal-plan events
"""
