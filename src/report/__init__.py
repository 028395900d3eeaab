"""JSON-lines reporting of matches, anchors and outcomes."""
