"""QR session handshake: identifiers, relay store, coordinator, controllers."""
