"""
tenure_batch -- Scheduled, monthly-deduped tenure reconciliation.

Architecture position:
    Top-level package.  May import tenure_services, tenure_engines,
    tenure_kernel and tenure_config.  Nothing imports tenure_batch except
    scripts and ``tenure_kernel.db.engine.create_tables`` (model registry).
"""
