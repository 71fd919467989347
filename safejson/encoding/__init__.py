"""Schema-directed JSON encoding and post-encoding escaping."""
