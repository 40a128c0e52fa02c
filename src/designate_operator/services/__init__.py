"""Resource drivers for the collaborators of a DesignateAPI."""
