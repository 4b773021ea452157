"""bundlescope CLI package."""
