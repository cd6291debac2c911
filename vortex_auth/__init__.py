"""vortex-auth: authentication and identity core."""
