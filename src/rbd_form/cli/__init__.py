"""``rbd-form`` command-line interface."""
