"""Command-line tools for the progression tracker."""
