def test_imports():
    """
    @brief
    Verifies that all core rulecheck modules are importable.

    @details
    Ensures package structure integrity and confirms that
    rulecheck, rulecheck.engine, rulecheck.dataloader, rulecheck.metrics
    and rulecheck.export are accessible without import errors.
    """
    import rulecheck
    import rulecheck.dataloader
    import rulecheck.engine
    import rulecheck.export
    import rulecheck.metrics

    # --- Assert ---
    # Confirm that modules were successfully imported and resolved
    assert all([rulecheck, rulecheck.dataloader, rulecheck.engine, rulecheck.export])
    assert rulecheck.metrics.get_violation_stats is rulecheck.get_violation_stats


def test_public_surface():
    """
    @brief
    The three entry points are exposed at package level.
    """
    import rulecheck

    for name in ("validate_items", "register_rule_validator", "get_violation_stats"):
        assert callable(getattr(rulecheck, name))
    assert rulecheck.__version__
