"""
flowcanvas - visual workflow canvas and execution engine.

Users place typed nodes on a canvas, wire them with edges and run the
graph; each node's behavior receives the merged results of its upstream
nodes and its status is tracked through the run.
"""
__version__ = "0.1.0"
