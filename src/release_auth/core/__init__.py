"""Classification, authentication, resolution and transfer."""
