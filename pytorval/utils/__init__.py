from pytorval.utils.logging import log_batch_results, setup_logging
