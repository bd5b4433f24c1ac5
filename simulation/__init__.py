"""simulation — The running life-sim.

Submodules
----------
sim           Simulation — world, clock and log, advanced once per frame
vitals_scene  VitalsScene — pygame view of the simulation
"""
