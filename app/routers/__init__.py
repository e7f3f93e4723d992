"""
routers/ — FastAPI route modules, one APIRouter per file.

items.py        item list and bulk assign/unassign
directory.py    users, customers, inquiries, current user
workload.py     per-user workload and team analytics
assignments.py  composed assignment board (runs the board engine in-process)

Routers parse input and map errors; rules live in services/ and assignments/.
"""
