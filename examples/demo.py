#
# Sort a few numbers by sleeping on them.
#
# This takes five seconds, the size of the largest number, not the sum.
# Set SLEEPSORT_UNIT to make it quicker.
#
import logging
import os
import time

import sleepsort

logging.basicConfig(level=logging.DEBUG if os.environ.get("SLEEPSORT_DEBUG") else logging.INFO)
sleepsort.setup(os.environ.get("SLEEPSORT_BACKEND", "trio"),
        unit=float(os.environ.get("SLEEPSORT_UNIT", 1)))

unsorted = [5, 1, 3, 2, 1, 2, 3, 4]

t1 = time.monotonic()
res = sleepsort.run(sleepsort.sleep_sort, unsorted)
print("It took %.2fs to sort %s" % (time.monotonic() - t1, res))
