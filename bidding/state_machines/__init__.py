#Transition rules for ride requests and driver bids.
#Every function validates the current state, mutates the record and returns it.
#Invalid transitions raise; nothing here talks to storage or push notifications.
