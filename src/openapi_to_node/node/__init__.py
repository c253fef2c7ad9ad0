"""Node property models and the builders that produce them."""
