"""
main.py — Bootstrap

1. Load tuning
2. Create the simulation and load item definitions
3. Spawn the demo NPC and its food
4. Create the app, push the vitals scene
5. Run
"""

from core import tuning
from core.app import App
from simulation.sim import Simulation
from simulation.vitals_scene import VitalsScene


def main():
    tuning.load()

    sim = Simulation()
    sim.load_items("data/items.toml")
    sim.demo()

    app = App(title="Life Sim", width=960, height=640, world=sim.world)
    app.push_scene(VitalsScene(sim))
    app.run()


if __name__ == "__main__":
    main()
