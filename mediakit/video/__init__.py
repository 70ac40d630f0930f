"""Image types, frame buffering, broadcasting and video frame transforms."""