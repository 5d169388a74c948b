"""Pure reply decoders."""
