from pystorelite import create_action

increment = create_action("[Counter] Increment")
decrement = create_action("[Counter] Decrement")
sync = create_action("[Counter] Sync", lambda value: value)
load_count_request = create_action("[Counter] Load Request")
load_count_success = create_action("[Counter] Load Success", lambda value: value)
load_count_failure = create_action("[Counter] Load Failure", lambda message: message)
