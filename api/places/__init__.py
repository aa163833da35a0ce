"""
Place CRUD and search: SQL, transactional orchestration, HTTP routes.
"""
