"""
The MODEL layer contains pure data structures and geometry.
It has NO knowledge of the GUI (Qt) or the Visualization (PyVista).
It deals with the curve, the tube mesh, the camera and the scene.
"""
import math

TWO_PI = 2.0 * math.pi
