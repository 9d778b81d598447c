# core package: configuration, logging, host runtime and the map resolver
