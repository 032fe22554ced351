"""
Example invocations of the forward and reverse engines.

    python -m dualtape [--log-level DEBUG]
"""

import argparse
import logging

from .core.tape import Tape
from .forward import derivative, gradient, jacobian


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Forward / reverse mode AD examples',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--log-level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # derivative(f, x)
    print(f"Derivative of f(x) = x^2 at {2.0} is {derivative(lambda x: x * x, 2.0)}")

    # gradient(f, x)
    g = gradient(lambda x: x[0] + x[1], [1.0, 2.0])
    print(f"Gradient of f(x,y) = x + y at ({1.0}, {2.0}) is {g}")
    g = gradient(lambda x: x[0] * x[1] + x[1] * x[1], [1.0, 2.0])
    print(f"Gradient of f(x,y) = x * y + y^2 at ({1.0}, {2.0}) is {g}")

    # jacobian(f, x)
    J = jacobian(lambda x: [x[0] * x[0] * x[1], x[0] + x[1]], [1.0, 2.0])
    print(f"Jacobian of f(x,y) = (x^2 y, x + y) at ({1.0}, {2.0}) is")
    print(J)

    # reverse mode
    tape = Tape(name="demo")
    x = tape.var(1.0)
    y = tape.var(1.0)
    z = -2.0 * x + x * x * x * y + 2.0 * y
    grad = z.backprop()
    print(f"z = -2x + x^3 y + 2y at (1, 1): dz/dx = {grad.wrt(x)}, dz/dy = {grad.wrt(y)}")
    print(f"tape holds {len(tape)} nodes")


if __name__ == "__main__":
    main()
