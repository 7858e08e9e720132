"""Domain layer - player selection and display state."""
