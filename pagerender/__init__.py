"""Document and image to web raster conversion service."""
