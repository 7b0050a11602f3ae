"""nexplore - a terminal browser for HDF5 and NeXus files."""

__version__ = "0.1.0"
