"""Scripts de linha de comando."""
