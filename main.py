"""Punto de entrada de la calculadora científica."""

import tkinter as tk

import config
from calculator_engine import CalculatorEngine
from calculator_ui import CalculatorApp
from logging_config import setup_logging


def main():
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)
    root = tk.Tk()
    root.geometry("420x640")
    root.minsize(380, 600)
    engine = CalculatorEngine()
    CalculatorApp(root, engine=engine)
    root.mainloop()


if __name__ == "__main__":
    main()
