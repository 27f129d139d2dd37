"""
Complete grammars built only from the public `pipeparse` API.
"""

import pipeparse.grammars.json as json
import pipeparse.grammars.calculator as calculator
import pipeparse.grammars.wallet as wallet
