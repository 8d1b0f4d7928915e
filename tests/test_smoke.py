"""Minimal smoke tests for the plan commenter package."""


def test_package_importable() -> None:
    """Ensure the top-level package exposes the expected namespace."""
    import plan_commenter

    assert plan_commenter.PlanCommenterService is not None
