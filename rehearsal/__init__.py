"""Line rehearsal accuracy service."""
