# skillsync/services/__init__.py
# Business logic modules; routers import them by name.
