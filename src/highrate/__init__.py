"""High rate target simulator: replays a lat,lon track into the map FIFO."""
