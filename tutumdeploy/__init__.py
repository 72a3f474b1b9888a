"""Deploy branch stacks to Tutum and wire them into the shared load balancer."""
