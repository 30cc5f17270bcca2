"""
The MODEL layer contains pure data structures and declarations.
It has NO knowledge of the GUI (Qt) or the Visualization (PyVista).
It deals with coordinate mappings, element descriptions and parameters.
"""
