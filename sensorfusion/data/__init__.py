"""Sources that feed samples into a Predictor: typed sensor events and CSV replay."""
