"""
Input loaders: lot forecast documents and peer-lot summaries from JSON files.

Modules
-------
lot_file : load_lot_file(), parse_lot_document(), load_peer_lots_file().
"""
