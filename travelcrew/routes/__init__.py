"""
Travel Crew Backend — API Routes Package
==========================================

Route Inventory:
    - resources.py:  router factory, mounted once per kind at
                     /api/tours, /api/rentals, /api/packages, /api/gallery
    - health.py:     GET /  and  GET /api/health
    - files.py:      GET /api/files/{path}  (local asset backend only)

Routes stay thin: extract form data, call the service, return the result.
"""
