__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "authenticate_user",
    "get_current_user",
    "require_roles",
    "oauth2_scheme",
    "utcnow",
    "to_utc_naive",
    "paginate",
]


def __getattr__(name):
    if name in {
        "verify_password",
        "get_password_hash",
        "create_access_token",
        "authenticate_user",
        "get_current_user",
        "require_roles",
        "oauth2_scheme",
    }:
        from . import security as _security
        return getattr(_security, name)
    if name in {"utcnow", "to_utc_naive"}:
        from . import clock as _clock
        return getattr(_clock, name)
    if name == "paginate":
        from . import pagination as _pagination
        return _pagination.paginate
    raise AttributeError(f"module 'skillsync.utils' has no attribute '{name}'")
