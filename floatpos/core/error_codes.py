"""
Structured error codes for positioning runs.
Use these keys in result warnings; map to user-facing messages in the CLI.
"""

# Known error keys
RESET_LIMIT_REACHED = "reset_limit_reached"
ELEMENT_NOT_FOUND = "element_not_found"
SCENE_INVALID = "scene_invalid"
RUN_FAILED = "run_failed"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    RESET_LIMIT_REACHED: "Middleware kept requesting resets; the limit was hit and later resets were ignored.",
    ELEMENT_NOT_FOUND: "Element name not found in the scene. Check --reference and --floating.",
    SCENE_INVALID: "Scene file is malformed. Check element rects and parent names.",
    RUN_FAILED: "Run failed. Check scene and inputs.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)
