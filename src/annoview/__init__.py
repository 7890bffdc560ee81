"""annoview: action-logged state engine for an image annotation workspace."""
