"""Durations: seconds-based unit library shared through a namespace.

A library Scope defines exported units (S, M, H, D, W); a user Scope
imports it as ``time`` and writes durations as expressions. Float
arithmetic stays exact, so ``2.5*time.D`` is still a whole number of
seconds.
"""

import constcalc

# -- Unit library ------------------------------------------------------------
units = constcalc.Scope()
units.assign("S", "1")
units.assign("M", "60*S")
units.assign("H", "60*M")
units.assign("D", "24*H")
units.assign("W", "7*D")
units.assign("ms", "S/1000.0")  # private: not visible through an import
units.freeze()

# -- User scope --------------------------------------------------------------
config = constcalc.Scope()
config.import_scope("time", units)
config.assign("timeout", "2*time.D + 4*time.H")
config.assign("retention", "2.5*time.W")


def main():
    for expr in ("1<<100 + 2 - 1<<100", "0777", "0xFF", "0b1010 ^ 0b0101", "0xFF - 0b11111110"):
        print(f"{expr} = {constcalc.int64(expr)}")

    print("timeout   =", config.int64("timeout"), "s")
    print("retention =", config.int64("retention"), "s")
    print("hours/day =", config.float64("time.D / time.H"))

    try:
        config.int64("time.H / 7.0")
    except constcalc.NotRepresentableError as e:
        print("error:", e)
    print("float64   =", config.float64("time.H / 7.0"))

    try:
        config.int64("time.ms")
    except constcalc.UnknownIdentifierError as e:
        print("error:", e)


if __name__ == "__main__":
    main()
