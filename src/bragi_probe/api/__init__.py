"""HTTP query surface for bragi-probe."""
