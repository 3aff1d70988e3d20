"""
Calculator 3
Main application entry point
"""
import logging
import tkinter as tk

import config
from gui import CalculatorGUI


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(f"Starting {config.APP_NAME} {config.VERSION}")

    root = tk.Tk()
    app = CalculatorGUI(root)
    root.mainloop()


if __name__ == "__main__":
    main()
