"""Runtime primitives shared by the build, scan and verify steps."""
