"""
Interfaz gráfica de la calculadora científica.

Usa tkinter. La interfaz no calcula nada: traduce botones y teclas en
operaciones de CalculatorState y muestra el estado resultante. Cada
pulsación se procesa de forma síncrona en el bucle de eventos.
"""

import tkinter as tk
from tkinter import font as tkfont

from calculator_engine import CalculatorEngine
from calculator_state import CalculatorState
from logging_config import get_logger

logger = get_logger(__name__)


class CalculatorApp:
    """Ventana principal de la calculadora científica."""

    # ── Paleta de colores ────────────────────────────────────────
    C = {
        "bg":         "#1E1E2E",
        "display_bg": "#181825",
        "num":        "#313244",
        "num_fg":     "#CDD6F4",
        "op":         "#F38BA8",
        "op_fg":      "#1E1E2E",
        "func":       "#45475A",
        "func_fg":    "#CDD6F4",
        "special":    "#585B70",
        "special_fg": "#CDD6F4",
        "equals":     "#89B4FA",
        "equals_fg":  "#1E1E2E",
        "toggle_on":  "#A6E3A1",
        "toggle_off": "#585B70",
        "expr_fg":    "#BAC2DE",
        "result_fg":  "#A6E3A1",
        "error_fg":   "#F38BA8",
    }

    # ── Funciones científicas ────────────────────────────────────
    #  (texto, nombre de la función)

    SCIENCE_BUTTONS = [
        [("sin", "sin"), ("cos", "cos"), ("tan", "tan"),
         ("ln", "ln"), ("log", "log"), ("eˣ", "exp")],
        [("sin⁻¹", "asin"), ("cos⁻¹", "acos"),
         ("tan⁻¹", "atan"), ("√", "sqrt"),
         ("∛", "cbrt"), ("x²", "square")],
        [("1/x", "reciprocal"), ("n!", "factorial")],
    ]

    MEMORY_BUTTONS = [
        ("MC", "memory:clear"), ("MR", "memory:recall"),
        ("M+", "memory:add"), ("M−", "memory:subtract"),
        ("MS", "memory:store"),
    ]

    # ── Teclado principal ────────────────────────────────────────
    #  Cada fila es una lista de (texto, acción, tipo_color)

    KEYPAD = [
        [("(",  "op:(",  "func"),  (")", "op:)", "func"),
         ("^",  "op:^",  "func"),  ("%", "op:%", "func")],

        [("AC", "clear",     "special"), ("CE", "clear_entry", "special"),
         ("⌫", "backspace", "special"), ("÷", "op:/", "op")],

        [("7",  "digit:7",  "num"), ("8", "digit:8", "num"),
         ("9",  "digit:9",  "num"), ("×", "op:*", "op")],

        [("4",  "digit:4",  "num"), ("5", "digit:5", "num"),
         ("6",  "digit:6",  "num"), ("−", "op:-", "op")],

        [("1",  "digit:1",  "num"), ("2", "digit:2", "num"),
         ("3",  "digit:3",  "num"), ("+", "op:+", "op")],

        [("±", "sign", "num"), ("0", "digit:0", "num"),
         (".",  "digit:.",  "num"), ("=", "equals", "equals")],
    ]

    # ── Teclado físico ───────────────────────────────────────────

    KEY_CHARS = {
        **{d: f"digit:{d}" for d in "0123456789."},
        **{op: f"op:{op}" for op in "+-*/%^()"},
        "=": "equals",
    }
    KEY_SYMS = {
        "Return":    "equals",
        "KP_Enter":  "equals",
        "Escape":    "clear",
        "BackSpace": "backspace",
        "Delete":    "clear_entry",
    }

    def __init__(self, root: tk.Tk, engine=None, state=None):
        self.root = root
        self.root.title("Calculadora Científica")
        self.root.configure(bg=self.C["bg"])
        self.root.resizable(False, False)

        self.engine = engine if engine is not None else CalculatorEngine()
        self.state = state if state is not None else CalculatorState()

        self._init_fonts()
        self._create_display()
        self._create_toggle_bar()
        self._create_science_panel()
        self._create_keypad()
        self._bind_keyboard()
        self._render()

    # ── Fuentes ──────────────────────────────────────────────────

    def _init_fonts(self):
        self._f_expr   = tkfont.Font(family="Consolas", size=14)
        self._f_result = tkfont.Font(family="Consolas", size=22, weight="bold")
        self._f_btn    = tkfont.Font(family="Segoe UI", size=15)
        self._f_func   = tkfont.Font(family="Segoe UI", size=12)
        self._f_small  = tkfont.Font(family="Segoe UI", size=11)

    # ── Pantalla ─────────────────────────────────────────────────

    def _create_display(self):
        frame = tk.Frame(self.root, bg=self.C["display_bg"], padx=12, pady=8)
        frame.pack(fill="x", padx=6, pady=(6, 2))

        # Línea auxiliar: expresión en curso, "expr =" o mensaje de error
        self.expr_var = tk.StringVar()
        tk.Label(
            frame, textvariable=self.expr_var, anchor="e",
            font=self._f_expr, bg=self.C["display_bg"], fg=self.C["expr_fg"],
        ).pack(fill="x", pady=(4, 0))

        self.result_var = tk.StringVar(value="0")
        self.result_label = tk.Label(
            frame, textvariable=self.result_var, anchor="e",
            font=self._f_result, bg=self.C["display_bg"], fg=self.C["result_fg"],
        )
        self.result_label.pack(fill="x", pady=(2, 4))

    # ── Barra de toggles (RAD/DEG · memoria) ─────────────────────

    def _create_toggle_bar(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="x", padx=6, pady=(2, 2))

        self.angle_btn = tk.Button(
            frame, text="DEG", font=self._f_small, width=6,
            bg=self.C["op"], fg=self.C["op_fg"],
            activebackground=self.C["op"], relief="flat",
            command=self._toggle_angle,
        )
        self.angle_btn.pack(side="left", padx=(0, 4))

        self.memory_var = tk.StringVar()
        tk.Label(
            frame, textvariable=self.memory_var, width=3,
            font=self._f_small, bg=self.C["bg"], fg=self.C["toggle_on"],
        ).pack(side="left")

        for text, action in reversed(self.MEMORY_BUTTONS):
            tk.Button(
                frame, text=text, font=self._f_small,
                bg=self.C["func"], fg=self.C["func_fg"],
                activebackground=self.C["special"], relief="flat",
                command=lambda a=action: self._on_key(a),
            ).pack(side="right", padx=1)

    # ── Panel de funciones científicas ───────────────────────────

    def _create_science_panel(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="x", padx=6, pady=2)
        max_cols = max(len(row) for row in self.SCIENCE_BUTTONS)
        for col in range(max_cols):
            frame.columnconfigure(col, weight=1, uniform="sci")

        for r, row_def in enumerate(self.SCIENCE_BUTTONS):
            for col, (text, name) in enumerate(row_def):
                tk.Button(
                    frame, text=text, font=self._f_func,
                    bg=self.C["func"], fg=self.C["func_fg"],
                    activebackground=self.C["special"], relief="flat",
                    command=lambda n=name: self._on_key(f"func:{n}"),
                ).grid(row=r, column=col, sticky="nsew", padx=2, pady=2, ipady=4)

    # ── Teclado numérico / operadores ────────────────────────────

    def _create_keypad(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="both", expand=True, padx=6, pady=(2, 6))

        max_cols = max(len(row) for row in self.KEYPAD)
        for c in range(max_cols):
            frame.columnconfigure(c, weight=1, uniform="key")

        for r, row_def in enumerate(self.KEYPAD):
            spans = self._compute_spans(len(row_def), max_cols)
            col_pos = 0
            for idx, (text, action, kind) in enumerate(row_def):
                btn = tk.Button(
                    frame, text=text, font=self._f_btn,
                    bg=self.C[kind], fg=self.C[f"{kind}_fg"],
                    activebackground=self.C["special"], relief="flat",
                    command=lambda a=action: self._on_key(a),
                )
                btn.grid(row=r, column=col_pos, columnspan=spans[idx],
                         sticky="nsew", padx=2, pady=2, ipady=8)
                col_pos += spans[idx]

        for r in range(len(self.KEYPAD)):
            frame.rowconfigure(r, weight=1)

    @staticmethod
    def _compute_spans(cols_in_row: int, max_cols: int) -> list[int]:
        """Reparte max_cols entre cols_in_row botones."""
        base, extra = divmod(max_cols, cols_in_row)
        spans = [base] * cols_in_row
        spans[-1] += extra
        return spans

    # ── Atajos de teclado ────────────────────────────────────────

    def _bind_keyboard(self):
        self.root.bind("<Key>", self._on_keypress)

    def _on_keypress(self, event):
        action = self.KEY_SYMS.get(event.keysym) or self.KEY_CHARS.get(event.char)
        if action is None:
            return None
        self._on_key(action)
        return "break"

    # ── Acciones ─────────────────────────────────────────────────

    def _on_key(self, action: str):
        self.state = self._dispatch(self.state, action)
        self._render()

    def _dispatch(self, state: CalculatorState, action: str) -> CalculatorState:
        kind, _, arg = action.partition(":")
        if kind == "digit":
            return state.append(arg)
        if kind == "op":
            return state.choose_operator(arg)
        if kind == "func":
            return state.invoke_function(arg)
        if kind == "memory":
            return getattr(state, f"memory_{arg}")()
        if action == "equals":
            return state.compute(self.engine)
        if action == "clear":
            return state.clear_all()
        if action == "clear_entry":
            return state.clear_entry()
        if action == "backspace":
            return state.delete_last_character()
        if action == "sign":
            return state.toggle_sign()
        logger.warning("Acción desconocida: %s", action)
        return state

    def _toggle_angle(self):
        self.state = self.state.toggle_angle_mode()
        self._render()

    # ── Render ───────────────────────────────────────────────────

    def _render(self):
        state = self.state
        self.expr_var.set(state.auxiliary_text)
        self.result_var.set(state.display_text)
        self.memory_var.set("M" if state.has_memory else "")
        self.result_label.config(
            fg=self.C["error_fg"] if state.is_error else self.C["result_fg"])

        if state.angle_mode == "deg":
            self.angle_btn.config(text="DEG", bg=self.C["op"], fg=self.C["op_fg"])
        else:
            self.angle_btn.config(text="RAD", bg=self.C["toggle_on"], fg=self.C["bg"])
