"""
TeenLife Hours Backend — API Routes Package
=============================================

Route Inventory:
    - volunteer.py:      /api/volunteer        (hour entries, total,
                                                recognition, verify-by-code)
    - notifications.py:  /api/notifications    (notification feed)
    - health.py:         GET /health           (service health check)

Routes stay thin: parse the request, call a service, wrap the result in
ApiResponse. Business rules live in services/.
"""
