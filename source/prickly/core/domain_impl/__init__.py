"""Domain pillars: param engine, infra (paths/settings/logging) and document io."""
